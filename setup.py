from setuptools import setup, find_packages
import re

# Read version from ratecalc/__init__.py
with open('ratecalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='ratecalc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
            'mcp[cli]>=1.0.0,<2',
        ],
    },
    entry_points={
        'console_scripts': [
            'rate-calc=ratecalc.cli.__main__:main',
            'rate-calc-mcp=ratecalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Hourly billing rate recommendations from employer cost inputs.',
    python_requires='>=3.10',
)
