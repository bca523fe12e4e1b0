"""AI judgment service for changedetection.io watches."""
