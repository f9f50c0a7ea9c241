def get_version_title():
    from importlib import metadata

    try:
        version = metadata.version("email_ext")
    except metadata.PackageNotFoundError:
        version = "<N/A>"
    return f"email_ext ver. {version}"
