from flask import jsonify


def ok(data=None, status=200):
    return jsonify({"data": data, "error": None}), status


def fail(message, status=400):
    return jsonify({"data": None, "error": message}), status
