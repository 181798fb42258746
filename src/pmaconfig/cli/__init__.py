"""pmaconfig command line interface."""
