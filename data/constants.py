SEPARATOR_LINE_LENGTH = 60

# Lowercase suffixes; compare against Path.suffix.lower()
ASE_EXTENSIONS = (".ase", ".aseprite")

ZLIB_COMPRESSION_LEVEL = 6

# Palette map images: source colors on the first row, destination colors below
PALETTE_MAP_FROM_ROW = 0
PALETTE_MAP_TO_ROW = 1
