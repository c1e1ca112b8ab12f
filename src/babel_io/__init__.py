"""Live speech translation: stdin audio → transcripts → translations → synthesized speech."""

__version__ = "0.1.0"
