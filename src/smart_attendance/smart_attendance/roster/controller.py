from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_session, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    def add_student():
        student = container.roster_service.add_student(current_session(), json_body())
        return jsonify({"message": "Student added successfully", "student": student.to_dict()}), 201

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        students = container.roster_service.list_students(current_session())
        return jsonify([s.to_dict() for s in students])

    @app.route("/api/students/<int:student_pk>", methods=["GET"], endpoint="get_student")
    def get_student(student_pk: int):
        return jsonify(container.roster_service.get_student(current_session(), student_pk).to_dict())

    @app.route("/api/students/<int:student_pk>", methods=["PUT"], endpoint="update_student")
    def update_student(student_pk: int):
        student = container.roster_service.update_student(current_session(), student_pk, json_body())
        return jsonify({"message": "Student updated successfully", "student": student.to_dict()})

    @app.route("/api/students/<int:student_pk>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_pk: int):
        container.roster_service.remove_student(current_session(), student_pk)
        return jsonify({"message": "Student deleted"})
