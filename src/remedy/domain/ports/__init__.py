"""Ports the recovery protocol expects from a persistence framework."""
