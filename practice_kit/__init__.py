"""Small web services and command-line tools: mail DNS checks, a quiz, a proof-of-work chain, weather, scrapers, JWT services, a user store and a URL shortener."""

__version__ = "0.1.0"