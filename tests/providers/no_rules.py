"""A module that is not a rule provider."""

CHECKS = {}
