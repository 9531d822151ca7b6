"""
figtidy.io
==========

Configuration files, logging setup and HDF5 reading.
"""
