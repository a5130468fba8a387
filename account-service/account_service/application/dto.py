from dataclasses import dataclass


@dataclass
class LogInInput:
    email: str
    password: str


@dataclass
class StudentSignUpInput:
    email: str
    password: str
    interest: str
    name: str


@dataclass
class ImageUpload:
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass
class InstructorSignUpInput:
    email: str
    password: str
    interest: str
    name: str
    occupation: str
    bio: str
    url: str
    image: ImageUpload
