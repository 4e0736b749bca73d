from setuptools import setup,find_packages

def readme():
    with open('README.txt') as f:
        return f.read()

setup(name='pyjadex',
      version='0.1',
      description='non-LTE escape probability radiative transfer in the manner of RADEX',
      long_description=readme(),
      classifiers=['Development Status :: 3 - Alpha',
                   'License :: OSI Approved :: MIT License',
                   'Programming Language :: Python :: 3',
                   'Topic :: Scientific/Engineering :: Astronomy',
                   'Intended Audience :: Science/Research'],
      keywords=['RADEX','radiative transfer','non-LTE','escape probability'],
      license='MIT',
      packages=find_packages('src'),
      package_dir={'':'src'},
      install_requires=['scipy','numpy','numba'],
      extras_require={'test':['pytest']},
      include_package_data=True,
      zip_safe=False,
      python_requires='>=3.8')
