r"""
This package defines routines for converting between the rotation representations used by the camera models.

=================  =====================================================================================================
Representation     Description
=================  =====================================================================================================
angle-axis         A 3 element vector of the form :math:`\mathbf{v}=\theta\hat{\mathbf{x}}` where :math:`\theta` is the
                   total angle to rotate by in radians and :math:`\hat{\mathbf{x}}` is the rotation axis.  This is the
                   representation stored in the extrinsic parameter blocks because it is minimal (3 parameters for 3
                   degrees of freedom), which is what a nonlinear optimizer needs.
rotation matrix    A :math:`3\times 3` orthonormal matrix :math:`\mathbf{T}_B^A` such that
                   :math:`\mathbf{T}_B^A\mathbf{y}_A` rotates the vector :math:`\mathbf{y}_A` from frame :math:`A` to
                   frame :math:`B`.
quaternion         A 4 element rotation quaternion
                   :math:`\mathbf{q}=\left[\begin{array}{c} q_x \\ q_y \\ q_z \\ q_s\end{array}\right]=
                   \left[\begin{array}{c}\text{sin}(\frac{\theta}{2})\hat{\mathbf{x}}\\
                   \text{cos}(\frac{\theta}{2})\end{array}\right]`, used internally as the intermediate when converting
                   matrices to angle-axis vectors.
=================  =====================================================================================================
"""

from rigcam.rotations.core import *

__all__ = ['angle_axis_to_rotmat', 'angle_axis_to_quaternion',
           'rotmat_to_angle_axis', 'rotmat_to_quaternion',
           'quaternion_to_rotmat', 'quaternion_to_angle_axis',
           'rot_x', 'rot_y', 'rot_z', 'skew']
