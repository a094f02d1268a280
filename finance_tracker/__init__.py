"""Console entry point for the finance tracker."""
