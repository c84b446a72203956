"""HTTP boundary for the analyzer."""
