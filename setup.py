"""
setup.py for the Sunshine build orchestrator

Runtime Requirements:
- CMake and make on PATH (invoked per install step)
- A Sunshine source checkout
- The package manager's library prefix (HOMEBREW_PREFIX or SUNSHINE_BUILD_DEPS_PREFIX)

Configuration:
- SUNSHINE_BUILD_INSTALL_ROOT overrides where install prefixes are created
- SUNSHINE_BUILD_STATE_DIR overrides where the installed variant registry lives
- SUNSHINE_BUILD_LOG_FILE writes full debug output to a file
"""

from pathlib import Path

from setuptools import find_packages, setup

project_root = Path(__file__).parent.resolve()
readme = project_root / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""


setup(
    name="sunshine-build",
    version="1.0.0",
    description="Platform- and option-aware build orchestrator for the Sunshine game stream host",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sunshine_build", "sunshine_build.*"]),
    package_data={
        "sunshine_build.config": [
            "*.yaml",
        ]
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "sunshine-build=sunshine_build.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Topic :: Software Development :: Build Tools",
    ],
)
