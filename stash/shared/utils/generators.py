"""Random value generators: tokens, alphanumeric ids, zero-width ids, word ids."""

import secrets
import string

ALPHANUMERIC = string.ascii_letters + string.digits

# Invisible in most renderers; a link made of these looks like the bare domain.
ZERO_WIDTH_CHARS = ("\u200b", "\u200c", "\u200d", "\u2060")

ADJECTIVES = (
    "able", "ancient", "autumn", "billowing", "bitter", "black", "blue", "bold",
    "brave", "bright", "broad", "broken", "calm", "clever", "cold", "cool",
    "crimson", "curly", "damp", "dark", "dawn", "delicate", "divine", "dry",
    "eager", "empty", "falling", "fancy", "flat", "floral", "fragrant", "frosty",
    "gentle", "gifted", "golden", "graceful", "green", "happy", "hidden", "holy",
    "icy", "jolly", "late", "lingering", "little", "lively", "long", "lucky",
    "misty", "morning", "muddy", "nameless", "noisy", "odd", "old", "orange",
    "patient", "plain", "polished", "proud", "purple", "quiet", "rapid", "red",
    "restless", "rough", "round", "royal", "shiny", "shy", "silent", "small",
    "snowy", "soft", "solitary", "sparkling", "spring", "square", "steep", "still",
    "summer", "swift", "tall", "tender", "tiny", "twilight", "wandering", "weathered",
    "white", "wild", "winter", "wispy", "withered", "yellow", "young", "zealous",
)

ANIMALS = (
    "aardvark", "albatross", "alpaca", "anteater", "antelope", "armadillo", "badger",
    "barracuda", "bat", "beaver", "bison", "bobcat", "buffalo", "camel", "capybara",
    "caribou", "cassowary", "chameleon", "cheetah", "chinchilla", "cobra", "condor",
    "coyote", "crane", "crow", "dingo", "dolphin", "dormouse", "eagle", "echidna",
    "eel", "elk", "emu", "falcon", "ferret", "finch", "flamingo", "fox", "gazelle",
    "gecko", "gerbil", "gibbon", "giraffe", "gnu", "gopher", "grouse", "hamster",
    "hare", "hedgehog", "heron", "hippo", "hornet", "hyena", "ibex", "ibis", "iguana",
    "impala", "jackal", "jaguar", "kangaroo", "kestrel", "koala", "lemur", "leopard",
    "llama", "lobster", "lynx", "magpie", "manatee", "meerkat", "mink", "mole",
    "mongoose", "moose", "narwhal", "newt", "ocelot", "octopus", "okapi", "opossum",
    "oriole", "otter", "owl", "panda", "panther", "parrot", "pelican", "penguin",
    "puffin", "quail", "raccoon", "raven", "salamander", "seal", "shrew", "sloth",
    "squid", "stork", "tapir", "toucan", "turtle", "vulture", "walrus", "weasel",
    "wombat", "yak", "zebra",
)


def random_string(length: int, alphabet: str = ALPHANUMERIC) -> str:
    """Return a cryptographically random string of length characters from alphabet."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def zero_width_string(length: int) -> str:
    """Return length random zero-width characters."""
    return "".join(secrets.choice(ZERO_WIDTH_CHARS) for _ in range(length))


def word_string(adjectives: int) -> str:
    """Return adjectives random adjectives plus one animal, PascalCased (e.g. 'QuietSwiftOtter')."""
    words = [secrets.choice(ADJECTIVES) for _ in range(max(adjectives, 0))]
    words.append(secrets.choice(ANIMALS))
    return "".join(word.capitalize() for word in words)


def generate_token() -> str:
    """Generate a new upload credential (URL-safe, 256 bits)."""
    return secrets.token_urlsafe(32)


def generate_stored_filename() -> str:
    """Generate the on-disk name for an upload: 32 hex characters, no extension."""
    return secrets.token_hex(16)
