# Copyright 2021 United States Government as represented by the Administrator of the National Aeronautics and Space
# Administration.  No copyright is claimed in the United States under Title 17, U.S. Code. All Other Rights Reserved.


"""
Welcome to rigcam

rigcam provides a pinhole camera model with radial distortion whose pose can be shared between the cameras of a rig.
Start with :mod:`rigcam.camera_models`.
"""
