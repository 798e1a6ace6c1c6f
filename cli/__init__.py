"""Developer command-line tools (benchmarks) for bktreex."""
