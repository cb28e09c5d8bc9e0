def invert_dict(input_dict):
    """ Map every value back to its key, the first key wins for duplicated values """
    inverse = {}
    for key, value in input_dict.items():
        inverse.setdefault(value, key)
    return inverse


def find_key_by_value(input_dict, value):
    """ Look up the first key of a value, None if the value is not present """
    return invert_dict(input_dict).get(value)
