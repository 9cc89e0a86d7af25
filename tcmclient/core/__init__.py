"""Core building blocks: errors, credential stores, dispatcher and uploads."""
