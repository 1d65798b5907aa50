from streamsha.chain import split_units
from streamsha.source import hash_file

if __name__ == "__main__":
    root_hex, annotated = hash_file("test.bin", encoding="hex")

    print("ROOT:", root_hex)
    print("ANNOTATED_BYTES:", len(annotated))
    print("UNITS:", len(split_units(annotated, 1024)))
