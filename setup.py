from setuptools import setup

# see pyproject.toml for static project metadata
setup(
    name="namat",
)
