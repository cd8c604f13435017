"""Email campaign insights from the Mailchimp Marketing API."""

__version__ = "0.1.0"
