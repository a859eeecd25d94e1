from setuptools import setup, find_packages

setup(
    name="greenkart_e2e",
    version="0.0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={"greenkart_e2e": ["static/*.j2"]},
    install_requires=[
        "playwright==1.52.0",
        "pydantic>=2",
        "python-dotenv",
        "pyyaml",
        "requests",
        "jinja2"
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires='>=3.10',
)
