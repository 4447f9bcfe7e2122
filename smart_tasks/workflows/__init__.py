"""End-to-end task workflows built on the service layer."""
