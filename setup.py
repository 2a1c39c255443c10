import os
from setuptools import setup

with open("README.md") as readme_file:
    readme = readme_file.read()

this = os.path.dirname(os.path.realpath(__file__))


def read(name):
    with open(os.path.join(this, name)) as f:
        return f.read()


VERSION = "1.2.0"


setup(
    name="auto-powermode",
    version=VERSION,
    description="Automatic power profile switching on AC/battery changes for Linux",
    long_description=readme,
    long_description_content_type="text/markdown",
    packages=[
        "auto_powermode",
        "auto_powermode.bin",
        "auto_powermode.config",
        "auto_powermode.dbus",
        "auto_powermode.modules",
    ],
    install_requires=read("requirements.txt").splitlines(),
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    include_package_data=True,
    zip_safe=True,
    license="GPLv3",
    keywords="linux power profiles power-profiles-daemon udev upower ac battery",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: POSIX :: Linux",
        "Environment :: Console",
        "Natural Language :: English",
    ],
    entry_points={
        "console_scripts": [
            "auto-powermode=auto_powermode.bin.auto_powermode:main",
            "auto-powermode-udev=auto_powermode.bin.auto_powermode_udev:main",
        ],
    },
)
