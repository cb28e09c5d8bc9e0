from setuptools import setup, find_namespace_packages

about = {}
with open("keypadmapper/_version.py") as version_file:
    exec(version_file.read(), about)


def readme():
    with open('README.rst') as readme_file:
        return readme_file.read()


setup(name='KeypadMapper',
      version=about["__version__"],
      description='Define key, mouse and media mappings of a programmable USB keypad',
      long_description=readme(),
      long_description_content_type='text/x-rst',
      keywords='keypad macro hid keymap knob',
      packages=find_namespace_packages(include=["keypadmapper", "keypadmapper.*"]),
      package_data={"keypadmapper.device": ["99-keypad.rules"]},
      python_requires='>=3.8',
      install_requires=[
          'hid',
          'PyYAML',
          'platformdirs',
          'numpy',
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
          'console_scripts': ['keypad-mapper=keypadmapper.main_app:main'],
      })
