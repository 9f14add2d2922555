"""MATLAB v7.3 .mat file format constants.

A v7.3 file is HDF5 with a 512 byte user block holding the MATLAB banner:

    [0, 512)           — preamble (banner + version/endian marker)
    /properties        — struct with date_time and sample_period text fields
    /<catalog>/        — struct per catalog (leading '/' stripped, '/' -> '_')
        properties     — optional JSON text field
        /<resource>/   — struct per resource
            dataset_<representation>[_<key>_<value>]*  — float64 series
    /#refs#/           — UTF-16 char arrays referenced by the text fields
"""

import string

# File extension
FILE_EXTENSION = ".mat"

# HDF5 user block reserved for the MATLAB preamble
USERBLOCK_SIZE = 512

# Preamble layout
BANNER_LENGTH = 116
PREAMBLE_MARKER = bytes([0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x02, 0x49, 0x4D])

# Group and attribute names
PROPERTIES_NAME = "properties"
REFS_GROUP = "#refs#"
CLASS_ATTR = "MATLAB_class"
INT_DECODE_ATTR = "MATLAB_int_decode"
DATASET_PREFIX = "dataset_"

# MATLAB class tags
CLASS_STRUCT = "struct"
CLASS_DOUBLE = "double"
CLASS_CHAR = "char"
CLASS_CELL = "cell"

# MATLAB_int_decode value for UTF-16 char arrays
CHAR_INT_DECODE = 2

# Slot names in #refs#, indexed by insertion order
REFS_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits + "_$"

# Upper bound on samples per chunk
MAX_CHUNK_LENGTH = 4096

# Subset enumeration is skipped above this many prime powers
MAX_FACTOR_GROUPS = 16

# Compression settings
COMPRESSION = "gzip"
COMPRESSION_OPTS = 7  # deflate level 0-9
SHUFFLE = True

# Text timestamp formats
DATE_TIME_FORMAT = "%Y-%m-%dT%H-%M-%SZ"
FILE_NAME_TIME_FORMAT = "%Y-%m-%dT%H-%M-%S"
