"""Read-only access to GridEngine job status (qstat) and accounting (ARCo) data."""
