"""Job application tracker with AI-tailored, fact-checked resumes."""

__version__ = "0.1.0"
