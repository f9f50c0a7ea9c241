import click


@click.command()
@click.option(
    "--home",
    envvar="EMAIL_EXT_HOME",
    default="email_ext_home",
    show_default=True,
    help="Directory where the configuration is persisted.",
)
def show(home):
    """
    Show the current global configuration.
    """
    from email_ext.host import Host

    host = Host(home=home)
    for descriptor in host.registry:
        click.secho(descriptor.display_name, fg="white", bold=True)
        for name, value in descriptor.GetFormValues().items():
            click.secho(f"  {name}", fg="cyan", nl=False)
            click.secho(f" = {value!r}")


@click.command()
@click.option(
    "--home",
    envvar="EMAIL_EXT_HOME",
    default="email_ext_home",
    show_default=True,
    help="Directory where the configuration is persisted.",
)
@click.argument("assignments", nargs=-1, required=True)
def configure(home, assignments):
    """
    Change global configuration fields, given as FORM_NAME=VALUE.

    Fields not given keep their current values; checkboxes accept true/false.

    e.g.

        email_ext configure ext_mailer_default_recipients=mickey@disney.com
    """
    from email_ext.authorization import ANONYMOUS
    from email_ext.descriptor import FormValidationError
    from email_ext.host import Host

    host = Host(home=home)
    form = {}
    for descriptor in host.registry:
        form.update(descriptor.GetFormValues())

    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        if not sep:
            raise click.BadParameter(
                f'"{assignment}" is not in the FORM_NAME=VALUE format',
                param_hint="assignments",
            )
        if name not in form:
            raise click.BadParameter(
                f'Unknown field "{name}"', param_hint="assignments"
            )
        form[name] = value

    try:
        configured = host.SubmitConfiguration(ANONYMOUS, form)
    except FormValidationError as e:
        raise click.BadParameter(str(e), param_hint="assignments")

    for descriptor in configured:
        click.secho("SAVED", fg="green", nl=False)
        click.secho(" - ", nl=False)
        click.secho(descriptor.GetConfigFile() or descriptor.display_name)


@click.group(name="email_ext")
@click.version_option(package_name="email_ext")
def email_ext():
    """
    Global configuration of extended e-mail notifications.
    """


email_ext.add_command(show)
email_ext.add_command(configure)
