# mypy: disallow-untyped-defs
import os
from http import HTTPStatus
from typing import Callable
from typing import Tuple
from typing import Union

import flask
from dotenv import load_dotenv
from werkzeug.wrappers import Response

from email_ext import get_version_title
from email_ext.authorization import AuthenticationError
from email_ext.authorization import User
from email_ext.descriptor import FormValidationError
from email_ext.host import Host
from email_ext.server.templates import CONFIGURE_HTML


app = flask.Flask("email_ext")
load_dotenv(dotenv_path=os.environ.get("EMAIL_EXT_DOTENV"))
if not app.debug:
    app.logger.setLevel("INFO")
app.logger.info(f"Initializing Server App - {get_version_title()}")

ResponseValue = Union[str, Response, Tuple[str, int], Tuple[str, int, dict]]


def get_host() -> Host:
    """
    Returns the host served by this app, creating it from the environment on first use.
    """
    host = app.config.get("EMAIL_EXT_HOST")
    if host is None:
        host = Host.FromEnvironment(os.environ)
        app.config["EMAIL_EXT_HOST"] = host
        app.logger.info(
            f"Host version {host.version}, home: {host.home}, "
            + ("secured" if host.is_secured else "unsecured")
        )
    return host


@app.route("/", methods=["GET"])
def index() -> str:
    return get_version_title()


@app.route("/configure", methods=["GET"])
def configure() -> ResponseValue:
    """
    Global configuration page, listing every section the caller may change.
    """

    def render(host: Host, user: User) -> ResponseValue:
        sections = [
            {"descriptor": d, "form_values": d.GetFormValues()}
            for d in host.GetDescriptorsForGlobalConfig(user)
        ]
        return flask.render_template_string(
            CONFIGURE_HTML, sections=sections, version_title=get_version_title()
        )

    return _handle_config_request(render)


@app.route("/configure/json", methods=["GET"])
def configure_json() -> ResponseValue:
    """
    Current values of the sections the caller may change, as JSON.
    """

    def values(host: Host, user: User) -> ResponseValue:
        return flask.jsonify(host.GetConfigurationValues(user))

    return _handle_config_request(values)


@app.route("/configSubmit", methods=["POST"])
def config_submit() -> ResponseValue:
    """
    Applies a submission of the global configuration form.
    """

    def submit(host: Host, user: User) -> ResponseValue:
        if not host.GetDescriptorsForGlobalConfig(user):
            app.logger.info(f'User "{user.id}" cannot change the global configuration')
            return (
                f'User "{user.id}" is not allowed to change the global configuration',
                HTTPStatus.FORBIDDEN,
            )
        try:
            configured = host.SubmitConfiguration(user, flask.request.form)
        except FormValidationError as e:
            app.logger.info(f"Rejected configuration from {user.id}: {e}")
            return str(e), HTTPStatus.BAD_REQUEST
        app.logger.info(
            f'Configuration saved by "{user.id}": '
            + ", ".join(d.display_name for d in configured)
        )
        return flask.redirect(flask.url_for("configure"))

    return _handle_config_request(submit)


def _handle_config_request(
    callback: Callable[[Host, User], ResponseValue]
) -> ResponseValue:
    """Common authentication and authorization for the configuration end-points."""
    host = get_host()
    authorization = flask.request.authorization
    try:
        if authorization is None:
            user = host.Authenticate(None, None)
        else:
            user = host.Authenticate(authorization.username, authorization.password)
    except AuthenticationError as e:
        app.logger.info(f"Authentication failed: {e}")
        return (
            str(e),
            HTTPStatus.UNAUTHORIZED,
            {"WWW-Authenticate": 'Basic realm="email_ext"'},
        )

    if not host.HasPermission(user, "Read"):
        return f'User "{user.id}" is missing the Overall/Read permission', HTTPStatus.FORBIDDEN

    try:
        return callback(host, user)
    except Exception:
        app.logger.exception("Unexpected exception")
        raise
