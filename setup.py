from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="linkpromise",
    version="0.1.0",
    description=(
        "Deferred values with then/catch/finally chaining, driven by a cooperative "
        "event loop and backed by linked-list queues"
    ),
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "sniffio >= 1.3",
        "typing_extensions >= 4.5; python_version < '3.11'",
    ],
    extras_require={"test": ["pytest >= 7.0"]},
    entry_points={"console_scripts": ["linkpromise = linkpromise.__main__:main"]},
)
