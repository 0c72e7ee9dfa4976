"""hookbox: video URL cache and cron job plugin for host runtimes."""

__version__ = "0.1.0"
