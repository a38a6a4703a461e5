"""Tools package for proberunner."""
