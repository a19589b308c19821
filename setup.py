from setuptools import setup, find_packages

setup(name='rigcam',
      version='1.0.0',
      description='Pinhole camera model with radial distortion and rig-shared extrinsics',
      packages=find_packages(include=['rigcam', 'rigcam.*']),
      python_requires='>=3.10',
      install_requires=['numpy', 'scipy>=1.7', 'lxml'],
      extras_require={'test': ['pytest']})
