from setuptools import find_packages, setup

setup(
  name="topicstreams",
  version="0.1.0",
  description="Followable topics: topics combined with the followed topic ids of a user, as asyncio streams.",
  python_requires=">=3.10",
  packages=find_packages(include=["topicstreams", "topicstreams.*"]),
  install_requires=["pydantic>=2"],
  entry_points={ "console_scripts": [ "topicstreams=topicstreams.bin:main_cli" ] },
)
