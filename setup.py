from setuptools import setup, find_packages
import re

# Read version from supportcalc/__init__.py
with open('supportcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='supportcalc',
    version=version,
    packages=find_packages(include=['supportcalc', 'supportcalc.*']),
    package_data={
        'supportcalc': ['guidelines/*.yaml'],
    },
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
            'support-calc=supportcalc.cli.__main__:main',
            'support-calc-mcp=supportcalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Child support guidelines worksheet calculator.',
    python_requires='>=3.10',
)
