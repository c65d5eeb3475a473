from setuptools import setup, find_packages


PACKAGE_NAME = "perf_profiler"
PACKAGE_VERSION = "0.3.0"
PACKAGE_AUTHORS = "perf_profiler contributors"
PACKAGE_DESCRIPTION = """Runtime performance telemetry for interactive applications:
fixed-cadence sampling, record/replay, timed scenario runs, KPI warnings and
CSV exchange of captured sample streams
"""
EXCLUDE_PACKAGES = ["tests", "tests.*"]
INSTALL_REQUIREMENTS = [
    "numpy",
    "matplotlib",
    "loguru",
    "psutil",
]
EXTRAS_REQUIRE = {
    "test": ["pytest"],
}


setup(
    name=PACKAGE_NAME,
    version=PACKAGE_VERSION,
    description=PACKAGE_DESCRIPTION,
    author=PACKAGE_AUTHORS,
    license="GPLv3",
    packages=find_packages(exclude=EXCLUDE_PACKAGES),
    install_requires=INSTALL_REQUIREMENTS,
    extras_require=EXTRAS_REQUIRE,
    zip_safe=False,
    python_requires=">=3.11",
)
