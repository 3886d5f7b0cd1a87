"""Scenario module - scripted request sequences."""

from .runner import ScenarioRunner

__all__ = ["ScenarioRunner"]
