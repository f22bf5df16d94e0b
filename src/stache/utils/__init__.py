"""Internal utilities for Stache."""
