def create(context):
    return {"context": context["test"], "bento": context.bento}
