def create(context):
    def greet(who):
        return f"hello {who}"
    return greet
