from perf_profiler.cli import main

main()
