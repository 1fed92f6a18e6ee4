"""Elements to build test cases for an :class:`billtag.app.Application`"""
