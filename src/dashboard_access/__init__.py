"""Dashboard access — computed UI entitlements checked against the live dashboard."""
