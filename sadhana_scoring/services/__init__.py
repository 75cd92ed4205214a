"""Services around the scoring core: configuration store, criteria resolution, group progress."""
