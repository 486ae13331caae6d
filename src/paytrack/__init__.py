"""PayTrack: employee hours, commissions and semi-monthly invoices."""

__version__ = "1.0.0"
