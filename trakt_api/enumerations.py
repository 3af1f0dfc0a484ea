class ImageSize:
    """Suffixes selecting a resized variant of a trakt image."""

    # Common
    UNCOMPRESSED = "uncompressed"

    # Posters
    POSTERS_138 = "-138"
    POSTERS_300 = "-300"

    # Fan art
    FANART_940 = "-940"
    FANART_218 = "-218"

    # Episodes
    EPISODES_218 = "-218"
