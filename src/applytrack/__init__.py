"""applytrack — personal job-application tracker with AI-drafted letters."""

__version__ = "0.1.0"
