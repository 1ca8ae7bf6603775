"""Time Dilation - a Pomodoro timer with a daily goal ledger."""

__version__ = "0.1.0"
