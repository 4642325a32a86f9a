"""
The `constants` module defines mathematical, time and physical constants used by the
Earth rotation and tide models.
"""

from jax.numpy import pi as PI

# Mathematical Constants
"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)

"""
Constant to convert arcseconds to radians. Equal to 2pi/(360*3600). Units: *rad/as*
"""
AS2RAD = 2.0 * PI / 360.0 / 3600.0

"""
Constant to convert radians to arcseconds. Equal to (360*3600)/(2pi). Units: *as/rad*
"""
RAD2AS = 360.0 * 3600.0 / PI / 2.0

# Time Constants

"""
Offset between Julian Date and Modified Julian Date. Units: *days*
"""
JD_MJD_OFFSET = 2400000.5

"""
Modified Julian Date of the J2000.0 epoch (2000-01-01 12:00:00 TT). Units: *days*
"""
MJD2000 = 51544.5

"""
Seconds in a day. Units: *s*
"""
SECONDS_PER_DAY = 86400.0

# Earth Constants
"""
Earth's equatorial radius. [m]

References:

1. GGM05s Gravity Model
"""
R_EARTH = 6.378136300e6  # [m] GGM05s Value

"""
Earth's Gravitational constant [m^3/s^2]

References:

1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
Applications*, 2012.
"""
GM_EARTH = 3.986004415e14  # [m^3/s^2] GGM05s Value

"""
Nominal mean angular velocity of the Earth. [rad/s]

References:

1. G. Petit and B. Luzum, *IERS Conventions (2010)*, IERS Technical Note 36, 2010.
"""
OMEGA_EARTH = 7.292115e-5  # [rad/s]

"""
Mean equatorial gravity. [m/s^2]

References:

1. G. Petit and B. Luzum, *IERS Conventions (2010)*, IERS Technical Note 36, 2010.
"""
GRAVITY_EQUATOR = 9.7803278  # [m/s^2]

"""
Newtonian constant of gravitation. [m^3/(kg s^2)]

References:

1. G. Petit and B. Luzum, *IERS Conventions (2010)*, IERS Technical Note 36, 2010.
"""
G_NEWTON = 6.67428e-11

"""
Density of sea water. [kg/m^3]

References:

1. G. Petit and B. Luzum, *IERS Conventions (2010)*, IERS Technical Note 36, 2010.
"""
RHO_SEA_WATER = 1025.0

# Sun Constants
"""
Gravitational constant of the Sun. [m^3/s^2]

References:

1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
Applications*, 2012.
"""
GM_SUN = 132712440041.939400 * 1e9

# Moon Constants
"""
Gravitational constant of the Moon. [m^3/s^2]

References:

1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and
Applications*, 2012.
"""
GM_MOON = 4902.800066 * 1e9

"""
Reference radius of the Moon. [m]

References:

1. A. Konopliv et al., *The JPL lunar gravity field to spherical harmonic degree
660 from the GRAIL Primary Mission*, 2013.
"""
R_MOON = 1.738e6
