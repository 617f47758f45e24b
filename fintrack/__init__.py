"""FinTrack API 서버 패키지.

FinTrack API server package — personal-finance tracking backend with
password/JWT authentication and rotating refresh tokens.
"""
