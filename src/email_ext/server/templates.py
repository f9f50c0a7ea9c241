CONFIGURE_HTML = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>Configure System [email-ext]</title>
</head>
<body>
<h1>Configure System</h1>
<p class="version">{{ version_title }}</p>
{% if not sections %}
<p class="empty">There is nothing you are allowed to configure.</p>
{% else %}
<form name="config" method="post" action="{{ url_for('config_submit') }}">
{% for section in sections %}
<fieldset id="{{ section.descriptor.id }}">
<legend>{{ section.descriptor.display_name }}</legend>
{% for field in section.descriptor.FIELDS %}
{% set value = section.form_values[field.form_name] %}
<div class="setting">
<label for="{{ field.form_name }}">{{ field.label }}</label>
{% if field.widget == "checkbox" %}
<input type="checkbox" id="{{ field.form_name }}" name="{{ field.form_name }}"{% if value %} checked{% endif %}>
{% elif field.widget == "textarea" %}
<textarea id="{{ field.form_name }}" name="{{ field.form_name }}" rows="6">
{{ value }}</textarea>
{% elif field.widget == "select" %}
<select id="{{ field.form_name }}" name="{{ field.form_name }}">
{% for choice in field.choices %}
<option value="{{ choice }}"{% if choice == value %} selected{% endif %}>{{ choice }}</option>
{% endfor %}
</select>
{% else %}
<input type="text" id="{{ field.form_name }}" name="{{ field.form_name }}" value="{{ value }}">
{% endif %}
</div>
{% endfor %}
</fieldset>
{% endfor %}
<input type="submit" name="Submit" value="Save">
</form>
{% endif %}
</body>
</html>
"""
