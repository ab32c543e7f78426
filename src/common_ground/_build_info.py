"""Release metadata; the release pipeline rewrites ``APP_VERSION``."""

APP_VERSION = "0.3.0"
