"""Packaging for PaceLab.

Install for development:
    pip install -e ".[test]"

Build a macOS .app bundle:
    pip install py2app
    python setup.py py2app
"""

import sys

from setuptools import setup, find_packages

APP = ["main.py"]
DATA_FILES = []
OPTIONS = {
    "argv_emulation": False,
    "iconfile": None,  # Replace with .icns path when a proper icon exists
    "plist": {
        "CFBundleName": "PaceLab",
        "CFBundleDisplayName": "PaceLab",
        "CFBundleIdentifier": "com.pacelab.app",
        "CFBundleVersion": "0.1.0",
        "CFBundleShortVersionString": "0.1.0",
        "NSHighResolutionCapable": True,
        "LSMinimumSystemVersion": "13.0",
    },
}

# py2app only exists on macOS; keep it out of ordinary installs
PY2APP_ARGS = {}
if "py2app" in sys.argv:
    PY2APP_ARGS = {
        "app": APP,
        "data_files": DATA_FILES,
        "options": {"py2app": OPTIONS},
        "setup_requires": ["py2app"],
    }

setup(
    **PY2APP_ARGS,
    name="PaceLab",
    version="0.1.0",
    packages=find_packages(include=["pacelab", "pacelab.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "numpy>=1.24",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "gui_scripts": ["pacelab = pacelab.__main__:main"],
    },
)
