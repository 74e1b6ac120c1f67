"""Legend text from a metric label string."""


def extract_label(label: str) -> str | None:
    """
    Return the text between the first "{" and the first "}" after it.

    'up{job="node",instance="a"}' -> 'job="node",instance="a"'. Nested braces are not
    balanced: 'a{b{c}d}' -> 'b{c'. Returns None when there is no such pair.
    """
    start = label.find("{")
    if start < 0:
        return None
    end = label.find("}", start + 1)
    if end < 0:
        return None
    return label[start + 1 : end]
