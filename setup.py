import io
import setuptools

with io.open('requirements.txt') as fp:
  requirements = [x.strip() for x in fp.readlines() if x.strip()]

with io.open('README.md', encoding='utf8') as fp:
  readme = fp.read()

setuptools.setup(
  name = 'webbundle',
  version = '1.0.0',
  author = 'Niklas Rosenstein',
  author_email = 'rosensteinniklas@gmail.com',
  description = 'Turns web archives into OSGi Web Application Bundles.',
  long_description = readme,
  long_description_content_type = 'text/markdown',
  license = 'MIT',
  packages = setuptools.find_packages('src'),
  package_dir = {'': 'src'},
  include_package_data = True,
  install_requires = requirements,
  extras_require = {
    'test': ['pytest']
  },
  entry_points = {
    'console_scripts': ['webbundle=webbundle.main:main']
  }
)
