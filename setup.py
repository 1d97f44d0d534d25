from setuptools import setup

setup(
    name="deep_rupture",
    version="0.1.0",
    packages=["deep_rupture", "deep_rupture.scripts"],
    python_requires=">=3.11",
    install_requires=["numpy", "scipy", "pandas", "typer"],
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={
        "console_scripts": [
            "analyse-events=deep_rupture.scripts.analyse_events:main",
        ]
    },
    include_package_data=True,
    zip_safe=False,
)
