"""passcrypt tests"""
